"""Test package for refguard"""
