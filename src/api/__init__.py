"""API - camada de borda para os serviços externos.

Responsabilidades:
- Falar HTTP com os serviços de metadados, criador, experiências e upload
- Validar respostas e convertê-las em tipos de domínio
- Classificar erros uma única vez (utils.errors)

NÃO PODE conter: políticas de retry de pipeline, concorrência, agregação.
"""
