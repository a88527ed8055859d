"""
IE_Libs - Image Editor Library Modules

This package contains the image processing core used by the submission
image editor, organized into specialized sub-packages:

- ImageEditingLib: Raster buffers and pixel-level operations (geometry, tone, color, auto lighting)
- PipelineLib: Serializable edit operations and the pipeline that applies them
- ImageIOLib: Decoding, metadata extraction and export of encoded images
- FragmentsLib: Critique fragments (image sub-regions and rich-text ranges)
"""

__version__ = "0.1.0"
