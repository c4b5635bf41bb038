class Role:
    EMPLOYEE = "EMPLOYEE"
    MANAGER = "MANAGER"
    HR_ADMIN = "HR_ADMIN"
    EXECUTIVE = "EXECUTIVE"
    SUPER_ADMIN = "SUPER_ADMIN"

    ALL = (EMPLOYEE, MANAGER, HR_ADMIN, EXECUTIVE, SUPER_ADMIN)


class Module:
    EMPLOYEES = "employees"
    ORG = "org"
    ATTENDANCE = "attendance"
    LEAVE = "leave"
    RECRUITMENT = "recruitment"
    PERFORMANCE = "performance"
    PAYROLL = "payroll"
    COMPENSATION = "compensation"
    ONBOARDING = "onboarding"
    OFFBOARDING = "offboarding"
    COMPLIANCE = "compliance"
    TRAINING = "training"
    SUCCESSION = "succession"
    SETTINGS = "settings"
    AUDIT = "audit"

    ALL = (
        EMPLOYEES,
        ORG,
        ATTENDANCE,
        LEAVE,
        RECRUITMENT,
        PERFORMANCE,
        PAYROLL,
        COMPENSATION,
        ONBOARDING,
        OFFBOARDING,
        COMPLIANCE,
        TRAINING,
        SUCCESSION,
        SETTINGS,
        AUDIT,
    )


class Action:
    VIEW = "view"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"
    EXPORT = "export"

    ALL = (VIEW, CREATE, UPDATE, DELETE, APPROVE, EXPORT)


def permission_key(module: str, action: str) -> str:
    return f"{module}:{action}"
