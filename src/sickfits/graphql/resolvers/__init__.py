"""Resolver functions called by the root Query and Mutation types."""
