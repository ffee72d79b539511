"""refract: reflective method resolution over declarative type universes."""

__version__ = "0.1.0"
