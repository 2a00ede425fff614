# src/hierarchy_flow/core/__init__.py
"""
Core do Hierarchy Flow.

O core é projetado para ser:
    - determinístico (mesma entrada na mesma ordem → mesmo schema e linhas)
    - testável de forma isolada
    - livre de I/O: leitura e escrita vivem nos Steps

Componentes principais:
    - errors / exceptions → payload canônico de erro e exceções tipadas
    - schema              → FieldType, SchemaField, RecordSchema
    - config              → loader YAML/JSON, deep-merge, hashing, FlattenOptions
    - hierarchy           → Node, GraphBuilder, annotate, FieldRemapper, RowEmitter
    - pipeline / engine   → Steps, RunContext, planner e Engine
"""
