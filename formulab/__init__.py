"""Formulation Lab: cosmetic formulation proposals from a generative model."""
