"""`manifestkit` invariants and boundaries.

Checked by tests/test_manifestkit_import_boundaries.py; keep both in sync.

Generic invariants:

1) `manifestkit` must not import `image_composer.*`.
2) `manifestkit` provides the stage descriptor value types, the pipeline base value,
   the stage type registry and the manifest assembler.
3) Cross-pipeline references are (name, ref) or (name, file) pairs resolved by name
   at assembly time; `manifestkit` never dereferences them to live pipelines.
4) `manifestkit` does not define project conventions like:
   - which stage types exist and what their options mean
   - which pipelines make up an image type
   - how build requests are loaded or validated
"""
