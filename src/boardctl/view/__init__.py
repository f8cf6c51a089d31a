"""View layer — board rendering boundary and drag-and-drop capability."""
