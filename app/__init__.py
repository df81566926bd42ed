"""Application server and API routes"""
