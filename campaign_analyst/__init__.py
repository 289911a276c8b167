"""Campaign performance analysis service backed by Gemini."""
