"""
Request, response and persisted models.
"""
