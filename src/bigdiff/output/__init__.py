"""Output — artifact materializer and run reporters."""
