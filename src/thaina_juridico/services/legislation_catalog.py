"""Official federal legislation imported into a user's knowledge base."""

from __future__ import annotations

from thaina_juridico.domain.entities import Legislation

_PLANALTO = "https://www.planalto.gov.br/ccivil_03"

LEGISLATIONS: tuple[Legislation, ...] = (
    Legislation("Constituição Federal de 1988", f"{_PLANALTO}/constituicao/constituicao.htm"),
    Legislation("Código Civil - Lei 10.406/2002", f"{_PLANALTO}/leis/2002/l10406compilada.htm"),
    Legislation(
        "Código Penal - Decreto-Lei 2.848/1940",
        f"{_PLANALTO}/decreto-lei/del2848compilado.htm",
    ),
    Legislation(
        "Código de Processo Civil - Lei 13.105/2015",
        f"{_PLANALTO}/_ato2015-2018/2015/lei/l13105.htm",
    ),
    Legislation(
        "Código de Processo Penal - Decreto-Lei 3.689/1941",
        f"{_PLANALTO}/decreto-lei/del3689.htm",
    ),
    Legislation("CLT - Decreto-Lei 5.452/1943", f"{_PLANALTO}/decreto-lei/del5452.htm"),
    Legislation(
        "Código de Defesa do Consumidor - Lei 8.078/1990",
        f"{_PLANALTO}/leis/l8078compilado.htm",
    ),
    Legislation(
        "ECA - Estatuto da Criança e do Adolescente - Lei 8.069/1990",
        f"{_PLANALTO}/leis/l8069.htm",
    ),
    Legislation(
        "Lei Maria da Penha - Lei 11.340/2006",
        f"{_PLANALTO}/_ato2004-2006/2006/lei/l11340.htm",
    ),
    Legislation("Estatuto do Idoso - Lei 10.741/2003", f"{_PLANALTO}/leis/2003/l10.741.htm"),
    Legislation("Lei de Execução Penal - Lei 7.210/1984", f"{_PLANALTO}/leis/l7210.htm"),
    Legislation(
        "Lei de Drogas - Lei 11.343/2006",
        f"{_PLANALTO}/_ato2004-2006/2006/lei/l11343.htm",
    ),
    Legislation(
        "Lei de Licitações - Lei 14.133/2021",
        f"{_PLANALTO}/_ato2019-2022/2021/lei/l14133.htm",
    ),
)
