#!/usr/bin/env python3
"""
Configuration for the Sales Tax Receipt Calculator
Edit these values to change defaults; rule files in rules/ override DEFAULT_TAX_RULES
"""

from pathlib import Path

# Rule Files
# tax_rules.yaml holds exempt keywords, tax rates and line grammar tokens.
# Values in the YAML file are deep-merged over DEFAULT_TAX_RULES below.
RULES_DIR = Path(__file__).parent / 'rules'
TAX_RULES_FILE = 'tax_rules.yaml'

# Environment Variables
#   SALESTAX_HOT_RELOAD=1  re-read rule files when their checksum changes
#   SALESTAX_LOG_LEVEL     default log level for the command line driver
HOT_RELOAD_ENV = 'SALESTAX_HOT_RELOAD'
LOG_LEVEL_ENV = 'SALESTAX_LOG_LEVEL'

# Built-in tax rules (used when no rule file is found)
# Keywords are matched as case-sensitive substrings of the item name:
#   book -> books, chocolate -> food, pill -> medical products
DEFAULT_EXEMPT_KEYWORDS = ('book', 'chocolate', 'pill')

DEFAULT_TAX_RULES = {
    'exempt_keywords': list(DEFAULT_EXEMPT_KEYWORDS),
    'tax_rates': {
        'basic_sales_tax': '0.10',     # Applied unless the item is exempt
        'import_duty': '0.05',         # Applied to every imported item
        'rounding_increment': '0.05',  # Tax is rounded UP to this multiple
    },
    'parsing': {
        'line_separator': ' at ',      # "<quantity> <name> at <price>"
        'import_marker': 'imported',   # Substring that flags an imported item
    },
    'driver': {
        'bill_sentinel': 'done',       # Ends the lines of one bill
        'continue_answer': 'yes',      # Starts another bill
    },
}

# Amount Display
AMOUNT_DISPLAY = {
    'quantum': '0.01',                 # Two decimal places on receipts
}

# Driver Prompts (interactive mode)
PROMPTS = {
    'bill': "Enter item details for Input {bill_number} (e.g., '1 book at 12.49'). Type 'done' when finished with this bill:",
    'continue': 'Do you want to enter another bill? (yes/no)',
}

# Logging Settings
LOGGING = {
    'level': 'INFO',                   # DEBUG, INFO, WARNING, ERROR
    'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    'log_file': 'salestax.log',        # Written only when a log directory is given
}
