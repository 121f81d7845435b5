"""comfysync - sync custom nodes and models into a ComfyUI installation."""

__version__ = "0.1.0"
