from .assignment import AssignRequest, AssignResponse, CandidateIn

__all__ = ["AssignRequest", "AssignResponse", "CandidateIn"]
