"""Android image resource generation."""

from .processor import ResourceProcessor, create_resource_processor


__all__ = ["ResourceProcessor", "create_resource_processor"]
