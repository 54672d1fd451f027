"""Tools used by the matching agents: document parsing, embeddings, email."""
