"""
Agent RAG backend.

Document chunking, embedding, dual-write persistence, and context retrieval
for agent knowledge bases.
"""
