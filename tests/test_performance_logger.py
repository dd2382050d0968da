# -*- coding: utf-8 -*-
"""
Profiling de rutas y funciones.
"""
import logging

import pytest
from flask import Flask, g

from galugas import performance_logger
from galugas.performance_logger import (
    get_function_stats,
    init_profiling,
    log_slow_route,
    profile_function,
    reset_stats,
)


@pytest.fixture(autouse=True)
def _clean_stats():
    reset_stats()
    yield
    reset_stats()


def test_profile_function_with_and_without_name():
    @profile_function
    def sumar(a, b):
        return a + b

    @profile_function(name='Operación crítica')
    def restar(a, b):
        return a - b

    assert sumar(1, 2) == 3
    assert sumar(2, 2) == 4
    assert restar(5, 1) == 4

    stats = get_function_stats()
    assert stats[sumar.__qualname__]['calls'] == 2
    assert stats['Operación crítica']['calls'] == 1
    assert stats['Operación crítica']['max_time'] >= stats['Operación crítica']['avg_time'] >= 0


def test_profile_function_counts_failures():
    @profile_function(name='falla')
    def falla():
        raise ValueError('x')

    with pytest.raises(ValueError):
        falla()
    stats = get_function_stats()['falla']
    assert stats['calls'] == 1
    assert stats['errors'] == 1


def test_reset_stats():
    profile_function(name='algo')(lambda: None)()
    assert 'algo' in get_function_stats()
    reset_stats()
    assert get_function_stats() == {}


def test_slow_function_warns(monkeypatch, caplog):
    monkeypatch.setattr(performance_logger, 'THRESHOLD_WARNING', 0)

    with caplog.at_level(logging.WARNING, logger='galugas.performance'):
        profile_function(name='lenta')(lambda: None)()
    assert 'Función lenta: lenta' in caplog.text


def test_log_slow_route_levels(caplog):
    with caplog.at_level(logging.WARNING, logger='galugas.performance'):
        log_slow_route('GET', '/api/logs/', None, 350, 'admin@galugas.com')
        log_slow_route('GET', '/api/otra', None, 900)

    warning, critical = caplog.records[-2:]
    assert warning.levelno == logging.WARNING
    assert 'Ver registro de actividad' in warning.getMessage()
    assert 'admin@galugas.com' in warning.getMessage()
    assert critical.levelno == logging.CRITICAL
    assert 'MUY LENTA' in critical.getMessage()
    assert 'anónimo' in critical.getMessage()


def test_init_profiling_sets_duration():
    app = Flask(__name__)
    app.secret_key = 'test'
    seen = {}

    @app.route('/ping')
    def ping():
        return 'pong'

    @app.after_request
    def _capture(response):
        seen['duration'] = g.get('duration_ms')
        return response

    # after_request corre en orden inverso: la medición va antes de la captura
    init_profiling(app)

    assert app.test_client().get('/ping').data == b'pong'
    assert seen['duration'] is not None and seen['duration'] >= 0


def test_init_profiling_disabled():
    app = Flask(__name__)
    app.config['ENABLE_PROFILING'] = False
    init_profiling(app)
    assert not app.before_request_funcs
