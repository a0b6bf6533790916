"""
服务层异常
"""


class NotFoundError(LookupError):
    """审核所需的学生或学位模板不存在"""
