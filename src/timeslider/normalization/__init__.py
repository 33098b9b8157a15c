"""
Normalization layer for user-supplied geographic data.

Handles timestamp normalization, field-name candidates, and coordinate
ordering so every record reaches the validator in canonical form.
"""
