"""
Media handling for menu photos.

- Image OCR (bitmap → plain text)
- In-memory bitmap storage for transcript image entries
- Upload validation
"""
