"""
Tests for FlappyRL
==================

Run all tests:
    pytest tests/

Run with coverage:
    pytest tests/ --cov=flappy_rl --cov-report=html
"""
