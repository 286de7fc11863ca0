"""FastAPI server for the TatVivah marketplace."""
