"""
mediaworker - hosted media generation and OCR behind simple JSON endpoints.
"""
