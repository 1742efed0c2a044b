"""
Extraction engine.

- walker: depth-first traversal of the node tree
- styles: published style resolution
- components: component and variant-set extraction
- raw_tokens: whole-tree colour, type and effect usage
- variables: theme variable collections
- assets: batched image export
- orchestrator: the full pipeline
"""
