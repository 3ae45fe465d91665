#!/usr/bin/env python3
"""
Demo: Generate WebIDL and TypeScript definitions for an example module.

Shows both output formats for the 32-bit and 64-bit addressing widths.
"""

from defgen.examples import build_example_module
from defgen.backends import DefinitionsFormat, generate_definitions, save_definitions_file


def main():
    print("=" * 80)
    print("DEFINITIONS GENERATOR DEMO")
    print("=" * 80)

    for is_64bit in (False, True):
        graph = build_example_module(is_64bit=is_64bit)
        width = "64" if is_64bit else "32"

        for fmt in DefinitionsFormat:
            print(f"\n{fmt.value.upper()} ({width}-bit):")
            print("-" * 80)
            print(generate_definitions(graph, fmt=fmt))

    graph = build_example_module()
    save_definitions_file(graph, "module.webidl", fmt=DefinitionsFormat.WEBIDL)
    save_definitions_file(graph, "module.d.ts", fmt=DefinitionsFormat.TYPESCRIPT)
    print("Saved to: module.webidl, module.d.ts")


if __name__ == "__main__":
    main()
