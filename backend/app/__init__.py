"""Campus housing matching service"""
