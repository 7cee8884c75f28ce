"""
Fluxo-IA: Natural-Language Browser Test Flows

Write a test scenario as a short list of Portuguese sentences
("Clique no elemento ...", "Verifique se o título contém ...") and
Fluxo-IA turns it into browser actions, assertions and a report.
"""

__version__ = "0.1.0"
