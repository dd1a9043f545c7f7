"""App - orquestração da migração, casos de uso e infraestrutura.

Subpastas:
- bootstrap/: composition root (factories, wiring de clientes)
- domain/: tipos de domínio (MetadataRecord, MigrationResult...)
- use_cases/: casos de uso (resolver → scheduler → agregador)
- services/: serviços de aplicação (sem IO direto)
- infra/: implementações concretas de IO que não são conectores de API
- protocols/: contratos/interfaces dos serviços externos
- observability/: correlation_id e métricas via logs

Padrão: app executa; api adapta; config configura; utils apoia.
"""
