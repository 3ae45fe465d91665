"""
Export Definitions Generator (defgen)

Renders interface declarations for the public surface of a compiled module:
    - WebIDL interface descriptions
    - TypeScript ambient module declarations

ARCHITECTURAL GUARANTEE:
------------------------
The core contains ZERO knowledge of:
    - Parsing, type checking or dead-code elimination
    - Option resolution beyond the addressing-width flag
    - Where the rendered text ends up

The export graph arrives fully resolved and pruned.
Rendering is a pure function of that graph.
"""

__version__ = "0.1.0"
