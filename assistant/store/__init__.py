from assistant.store.firestore import FirestoreGlossaryStore, GlossaryStore

__all__ = ["FirestoreGlossaryStore", "GlossaryStore"]
