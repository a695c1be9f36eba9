"""Domain packages: questions, profiles, schedules, shift_exchange"""
