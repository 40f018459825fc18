"""Use-case layer for the dashboard screens.

Each module wraps one group of server actions: it builds the camelCase
payload, unwraps the result envelope and maps failures to ``UseCaseError``
without holding any UI state.
"""
