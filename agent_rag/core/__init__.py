"""Domain core: exceptions, document processing pipeline, context assembly."""
