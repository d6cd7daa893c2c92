"""
PhishSense Services
"""
