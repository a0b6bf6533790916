"""
业务逻辑层（Service）包
"""
from .exceptions import NotFoundError
from .prerequisite_graph import (
    build_prerequisite_graph,
    build_catalog_graph,
    detect_cycle,
    topological_levels,
    semester_mapping,
)
from .requirement_evaluator import evaluate, evaluate_alternative
from .path_optimizer import find_conditional_paths
from .requirement_validator import (
    validate_requirement,
    validate_template,
    validate_sequence,
    check_single_effective,
)
from .degree_audit import audit, what_if
from .degree_audit_service import DegreeAuditService
from .template_service import TemplateService

__all__ = [
    'NotFoundError',
    'build_prerequisite_graph',
    'build_catalog_graph',
    'detect_cycle',
    'topological_levels',
    'semester_mapping',
    'evaluate',
    'evaluate_alternative',
    'find_conditional_paths',
    'validate_requirement',
    'validate_template',
    'validate_sequence',
    'check_single_effective',
    'audit',
    'what_if',
    'DegreeAuditService',
    'TemplateService',
]
