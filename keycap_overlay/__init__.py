"""
Keycap Overlay Package.

Vector geometry for printable calculator keyboard overlays: registration
marks, overlay outlines, per-key rounded rectangles and legends, tiled
onto a page and drawn to PDF.

Subpackages:
    path_ir: Immutable drawing operations and paths
    geometry: Rounded rectangles, registration marks, key grid, tiling
    configs: Profile loading and validation
    render: PDF output
    scripts: Command-line entry points
    utils: Filesystem and logging helpers
"""

__all__ = ["path_ir", "geometry", "configs", "render", "scripts", "utils"]
