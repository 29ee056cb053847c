"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager

_DEFAULT_PROVIDER = object()


class Services:
    """Container for all application services.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If None, one is
            created from config.
        llm_provider: Optional LLM provider for testing. If omitted, one is
            created from config (None when LLM features are disabled).
    """

    def __init__(self, config: Config, db_manager=None, llm_provider=_DEFAULT_PROVIDER):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from llm import get_llm_provider
        from services.participants import ParticipantService
        from services.categories import CategoryService
        from services.expenses import ExpenseLedger
        from services.recurring import RecurringExpenseService
        from services.salary_profiles import SalaryProfileService
        from services.deductions import DeductionService
        from services.exchange_rates import ExchangeRateService
        from services.settlement import SettlementCalculator
        from services.extraction import DocumentExtractionService
        from services.salary_conversions import SalaryConversionService
        from services.household_income import HouseholdIncomeService

        if llm_provider is _DEFAULT_PROVIDER:
            llm_provider = get_llm_provider(config)
        self.llm_provider = llm_provider

        self.participants = ParticipantService(self.db_manager)
        self.categories = CategoryService(self.db_manager)
        self.expenses = ExpenseLedger(self.db_manager)
        self.recurring = RecurringExpenseService(self.db_manager, self.expenses)
        self.salary_profiles = SalaryProfileService(
            self.db_manager,
            local_currency=config.local_currency,
            foreign_currency=config.foreign_currency,
        )
        self.deductions = DeductionService(self.db_manager)
        self.conversions = SalaryConversionService(self.db_manager)
        self.exchange_rates = ExchangeRateService(
            provider=llm_provider,
            fallback_rate=config.fallback_exchange_rate,
            cache_seconds=config.exchange_rate_cache_seconds,
        )
        self.settlement = SettlementCalculator(
            self.participants,
            self.expenses,
            self.salary_profiles,
            self.deductions,
            self.exchange_rates,
            local_currency=config.local_currency,
            split_ratio=config.settlement_split_ratio,
            reference_color=config.settlement_reference_color,
            conversions=self.conversions,
        )
        self.extraction = DocumentExtractionService(
            llm_provider,
            self.categories,
            self.expenses,
            self.deductions,
            uncategorized_name=config.uncategorized_category,
        )
        self.household = HouseholdIncomeService(
            self.participants,
            self.salary_profiles,
            self.expenses,
            self.settlement,
            history_months=config.household_history_months,
        )
