"""Builds robust, minimal selectors for recorded browser elements."""
