"""
hack-asm Command-Line Interface
===============================

- **hackasm**: Hack assembler (``.asm`` -> ``.hack``)

The tool is a Click application with built-in help and error reporting.
"""

__all__ = ["hackasm"]
