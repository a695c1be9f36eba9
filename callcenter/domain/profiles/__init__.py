"""Profiles domain - own profile, directory and calendar month"""
