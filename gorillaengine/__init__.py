"""Entity-component-system game core with 3D maths, skeletal animation poses, camera control and text layout."""

__version__ = "0.1.0"