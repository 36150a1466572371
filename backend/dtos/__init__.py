"""
Data Transfer Objects (DTOs) Layer

This package contains DTOs that decouple callers from the database models.
DTOs prevent leaking database structure to external APIs and allow independent evolution.

Structure:
- request/: DTOs accepted by repository write operations
- response/: DTOs returned by repository read operations
"""
