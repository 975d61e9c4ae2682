"""
Services module - Translation providers

This module provides:
- base: The TranslationService interface and unit/result records
- http: Shared httpx plumbing for REST providers
- google, deepl, azure, openai: REST providers
- amazon: Amazon Translate through boto3
- dry_run, manual: Offline services
"""

from typing import Dict, List, Type

from autotranslate.exceptions import InitError
from autotranslate.services.base import (
    ServiceOptions,
    TranslationResult,
    TranslationService,
    TranslationUnit,
)
from autotranslate.services.amazon import AmazonTranslateService
from autotranslate.services.azure import AzureTranslatorService
from autotranslate.services.deepl import DeepLFreeService, DeepLService
from autotranslate.services.dry_run import DryRunService
from autotranslate.services.google import GoogleTranslateService
from autotranslate.services.manual import ManualService
from autotranslate.services.openai import OpenAIService

SERVICES: Dict[str, Type[TranslationService]] = {
    service.name: service
    for service in (
        GoogleTranslateService,
        DeepLService,
        DeepLFreeService,
        AzureTranslatorService,
        AmazonTranslateService,
        OpenAIService,
        DryRunService,
        ManualService,
    )
}


def available_services() -> List[str]:
    return list(SERVICES)


def create_service(name: str, **kwargs) -> TranslationService:
    """
    Instantiate a service by name.

    Raises:
        InitError: If no service has that name
    """
    if name not in SERVICES:
        raise InitError(
            f"The service {name} doesn't exist. Available services: {', '.join(available_services())}",
            details={"service": name},
        )
    return SERVICES[name](**kwargs)
