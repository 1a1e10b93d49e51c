"""Application services for the semtag CLI.

Services implement the release logic, coordinating between the core layer
(core/) and the infrastructure adapters (git/, platform/).
"""
