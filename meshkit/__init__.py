"""Procedural triangle meshes and DDS texture decoding for 3D scenes."""

__version__ = "0.1.0"
__all__ = ["dds", "knot", "profiles", "round", "shape"]