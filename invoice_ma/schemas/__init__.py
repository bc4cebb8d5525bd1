from .account import (
    AccountCreate,
    AccountRead,
    AdminUser,
    CompanySettingsRead,
    CompanySettingsUpdate,
    CreditBalance,
    CreditTopUp,
    InitialData,
    ProfileUpdate,
)
from .client import ClientRead, ClientWrite
from .invoice import (
    InvoiceItemRead,
    InvoiceItemWrite,
    InvoiceRead,
    InvoiceWrite,
    MarkPaid,
    NextInvoiceNumber,
    OverdueResult,
)
from .report import (
    CashFlowDay,
    CashFlowForecast,
    CollectionRow,
    DashboardSummary,
    ExchangeRate,
    PaymentHabit,
    Performance,
    RankedClient,
    RankedService,
    SalesRow,
    TvaReport,
)
from .settings import (
    AdminGeneralSettings,
    GlobalNotification,
    ThemeSettings,
)
