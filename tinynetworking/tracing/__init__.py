from ._traced import get_tracer, set_span_attributes, traced

__all__ = ["get_tracer", "set_span_attributes", "traced"]
