"""
JSON-LD keywords and ODRL vocabulary terms used in expanded-form documents.

Property names are full IRIs because expanded form carries no context.
"""

# JSON-LD keywords
ID = "@id"
TYPE = "@type"
VALUE = "@value"

ODRL_SCHEMA = "http://www.w3.org/ns/odrl/2/"

# Policy types
ODRL_POLICY_TYPE_SET = ODRL_SCHEMA + "Set"
ODRL_POLICY_TYPE_OFFER = ODRL_SCHEMA + "Offer"
ODRL_POLICY_TYPE_AGREEMENT = ODRL_SCHEMA + "Agreement"

# Policy attributes
ODRL_PERMISSION_ATTRIBUTE = ODRL_SCHEMA + "permission"
ODRL_PROHIBITION_ATTRIBUTE = ODRL_SCHEMA + "prohibition"
ODRL_OBLIGATION_ATTRIBUTE = ODRL_SCHEMA + "obligation"
ODRL_ASSIGNEE_ATTRIBUTE = ODRL_SCHEMA + "assignee"
ODRL_ASSIGNER_ATTRIBUTE = ODRL_SCHEMA + "assigner"
ODRL_TARGET_ATTRIBUTE = ODRL_SCHEMA + "target"

# Rule attributes
ODRL_ACTION_ATTRIBUTE = ODRL_SCHEMA + "action"
ODRL_CONSTRAINT_ATTRIBUTE = ODRL_SCHEMA + "constraint"
ODRL_DUTY_ATTRIBUTE = ODRL_SCHEMA + "duty"
ODRL_CONSEQUENCE_ATTRIBUTE = ODRL_SCHEMA + "consequence"

# Action attributes
ODRL_ACTION_TYPE_ATTRIBUTE = ODRL_SCHEMA + "type"
ODRL_INCLUDED_IN_ATTRIBUTE = ODRL_SCHEMA + "includedIn"
ODRL_REFINEMENT_ATTRIBUTE = ODRL_SCHEMA + "refinement"

# Constraint attributes
ODRL_LEFT_OPERAND_ATTRIBUTE = ODRL_SCHEMA + "leftOperand"
ODRL_OPERATOR_ATTRIBUTE = ODRL_SCHEMA + "operator"
ODRL_RIGHT_OPERAND_ATTRIBUTE = ODRL_SCHEMA + "rightOperand"
ODRL_AND_CONSTRAINT_ATTRIBUTE = ODRL_SCHEMA + "and"
ODRL_OR_CONSTRAINT_ATTRIBUTE = ODRL_SCHEMA + "or"
ODRL_XONE_CONSTRAINT_ATTRIBUTE = ODRL_SCHEMA + "xone"
