"""
Business operations, one module per resource. Each function takes the
Motor database handle and raises HTTPException for client errors.
"""
