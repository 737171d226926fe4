"""Qt widgets: main window and dialogs."""
