#!/usr/bin/env python3
"""
Rule Loader - Load YAML tax rules from the rules directory
Merges tax_rules.yaml over the built-in defaults from config.py
"""

import copy
import hashlib
import logging
import os
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .config import DEFAULT_TAX_RULES, HOT_RELOAD_ENV, RULES_DIR, TAX_RULES_FILE

logger = logging.getLogger(__name__)


class RuleLoader:
    """Load and parse YAML rules, merging tax_rules.yaml with the built-in defaults"""

    def __init__(self, rules_dir: Optional[Path] = None, enable_hot_reload: Optional[bool] = None):
        """
        Initialize rule loader with rules directory

        Args:
            rules_dir: Directory containing tax_rules.yaml (defaults to the packaged rules/)
            enable_hot_reload: Enable checksum-based hot-reload.
                              None reads SALESTAX_HOT_RELOAD from the environment ("1" enables)
        """
        if enable_hot_reload is None:
            enable_hot_reload = os.environ.get(HOT_RELOAD_ENV, '0') == '1'

        self.rules_dir = Path(rules_dir) if rules_dir is not None else RULES_DIR
        self._rules_cache = {}
        self._file_checksums = {} if enable_hot_reload else None  # Only track when enabled
        self._enable_hot_reload = enable_hot_reload
        self._file_read_count = 0

    def _calculate_file_checksum(self, file_path: Path) -> str:
        """Calculate MD5 checksum for a file"""
        try:
            with open(file_path, 'rb') as f:
                return hashlib.md5(f.read()).hexdigest()
        except OSError as e:
            logger.warning(f"Error calculating checksum for {file_path}: {e}")
            return ''

    def _should_reload_file(self, filename: str, rule_file: Path) -> bool:
        """Check if a rule file should be reloaded based on checksum"""
        # Fast path: when hot-reload is disabled, only check cache
        if not self._enable_hot_reload:
            return filename not in self._rules_cache

        if not rule_file.exists():
            return False

        current_checksum = self._calculate_file_checksum(rule_file)
        cached_checksum = self._file_checksums.get(filename)

        if current_checksum != cached_checksum:
            if cached_checksum:
                logger.debug(f"Rule file {filename} modified, reloading...")
            return True

        return False

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """Load a YAML file directly"""
        self._file_read_count += 1
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading YAML file {file_path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.error(f"Rule file {file_path} must contain a mapping, got {type(data).__name__}")
            return {}
        return data

    def _merge_rules(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Deep merge two dictionaries
        override takes precedence over base
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_rules(result[key], value)
            else:
                result[key] = value

        return result

    def get_file_read_count(self) -> int:
        """Number of rule files read from disk since the last reset"""
        return self._file_read_count

    def reset_file_read_count(self):
        self._file_read_count = 0

    def clear_cache(self):
        """Clear the rules cache"""
        logger.debug("Clearing rules cache")
        self._rules_cache.clear()
        if self._file_checksums is not None:
            self._file_checksums.clear()

    def load_rule_file_by_name(self, filename: str) -> Dict[str, Any]:
        """
        Load a specific rule file by filename (e.g., 'tax_rules.yaml')

        Args:
            filename: Rule file name

        Returns:
            Rule dictionary or empty dict if not found
        """
        rule_file = self.rules_dir / filename

        if not rule_file.exists():
            logger.warning(f"Rule file not found: {rule_file}")
            return {}

        if self._should_reload_file(filename, rule_file):
            self._rules_cache[filename] = self._load_yaml_file(rule_file)
            if self._enable_hot_reload:
                self._file_checksums[filename] = self._calculate_file_checksum(rule_file)
            logger.debug(f"Loaded rule file: {filename}")

        return self._rules_cache.get(filename, {})

    def load_tax_rules(self) -> Dict[str, Any]:
        """
        Load tax_rules.yaml merged over DEFAULT_TAX_RULES

        Returns:
            Merged rules dictionary (the 'meta' block is dropped)
        """
        file_rules = self.load_rule_file_by_name(TAX_RULES_FILE)
        file_rules = {key: value for key, value in file_rules.items() if key != 'meta'}
        return self._merge_rules(DEFAULT_TAX_RULES, file_rules)

    def get_exempt_keywords(self) -> List[str]:
        """
        Get exempt category keywords

        Returns:
            List of keywords; an item whose name contains any of them is exempt
        """
        keywords = self.load_tax_rules().get('exempt_keywords') or []
        if isinstance(keywords, str) or not isinstance(keywords, list):
            raise ValueError(f"exempt_keywords must be a list of strings, got {keywords!r}")
        return [str(keyword) for keyword in keywords if str(keyword)]

    def get_tax_rates(self) -> Dict[str, Decimal]:
        """
        Get tax rates as Decimals

        Returns:
            Dict with basic_sales_tax, import_duty and rounding_increment
        """
        rates = self.load_tax_rules().get('tax_rates', {})
        result = {}
        for key in ('basic_sales_tax', 'import_duty', 'rounding_increment'):
            raw = rates.get(key)
            try:
                value = Decimal(str(raw))
            except InvalidOperation:
                raise ValueError(f"tax_rates.{key} is not a number: {raw!r}") from None
            if not value.is_finite() or value < 0:
                raise ValueError(f"tax_rates.{key} must be a non-negative number, got {raw!r}")
            result[key] = value

        if result['rounding_increment'] == 0:
            raise ValueError("tax_rates.rounding_increment must be greater than zero")
        return result

    def get_parsing_rules(self) -> Dict[str, str]:
        """Get line grammar tokens (line_separator, import_marker)"""
        parsing = self.load_tax_rules().get('parsing', {})
        rules = {key: str(parsing.get(key, '')) for key in ('line_separator', 'import_marker')}
        for key, value in rules.items():
            if not value:
                raise ValueError(f"parsing.{key} must not be empty")
        return rules

    def get_driver_rules(self) -> Dict[str, str]:
        """Get interactive driver sentinels (bill_sentinel, continue_answer)"""
        driver = self.load_tax_rules().get('driver', {})
        return {key: str(driver.get(key, '')).strip().lower() for key in ('bill_sentinel', 'continue_answer')}
