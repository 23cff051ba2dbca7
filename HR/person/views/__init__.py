from .employee_views import (
    employee_list,
    employee_detail,
    check_nik,
    employee_status,
    clear_blacklist,
    employee_history,
)
from .mutation_views import (
    mutation_list,
    mutation_approve,
    mutation_reject,
)
from .import_views import (
    import_preview,
    import_confirm,
    import_template,
)
