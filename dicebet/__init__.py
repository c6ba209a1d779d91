"""Provably-fair dice bet configurator."""
