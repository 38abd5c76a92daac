"""University directory"""
