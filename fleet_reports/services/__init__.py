"""
Service layer.

Subpackages:
    common     -- errors, unit of work, pagination
    access     -- plant-level access resolution
    analytics  -- aggregation and report assembly
    export     -- format renderers and worker pool
    audit      -- audit history
"""
