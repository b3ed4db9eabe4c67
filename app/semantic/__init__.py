from .tfidf import cosine_similarity, document_similarity, tfidf_vectors, top_terms

__all__ = ["cosine_similarity", "document_similarity", "tfidf_vectors", "top_terms"]
