"""Sample resources and admission reviews used by the tests."""
