"""Shared support code for the keypad overlay generator.

Architecture layers (strict one-way dependency):
    keypad_overlay/scripts/ → keypad_overlay/{document,render,layout,configs}/
        → keypad_overlay/{content,geometry}/ → src/utils/

Key invariants:
    - Geometry in inches end-to-end; points only in the page transform
    - YAML-only configs
"""

__version__ = "1.0.0"
