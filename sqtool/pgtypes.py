"""PostgreSQL built-in type OIDs."""

from enum import IntEnum

VARHDRSZ = 4


class PgType(IntEnum):
    """Object identifiers of PostgreSQL built-in data types."""

    BOOL = 16
    BYTEA = 17
    CHAR = 18
    NAME = 19
    INT8 = 20
    INT2 = 21
    INT2VECTOR = 22
    INT4 = 23
    REGPROC = 24
    TEXT = 25
    OID = 26
    TID = 27
    XID = 28
    CID = 29
    OIDVECTOR = 30
    JSON = 114
    XML = 142
    PGNODETREE = 194
    PGDDLCOMMAND = 32
    POINT = 600
    LSEG = 601
    PATH = 602
    BOX = 603
    POLYGON = 604
    LINE = 628
    FLOAT4 = 700
    FLOAT8 = 701
    ABSTIME = 702
    RELTIME = 703
    TINTERVAL = 704
    UNKNOWN = 705
    CIRCLE = 718
    CASH = 790
    MACADDR = 829
    INET = 869
    CIDR = 650
    INT2ARRAY = 1005
    INT4ARRAY = 1007
    TEXTARRAY = 1009
    OIDARRAY = 1028
    FLOAT4ARRAY = 1021
    ACLITEM = 1033
    CSTRINGARRAY = 1263
    BPCHAR = 1042
    VARCHAR = 1043
    DATE = 1082
    TIME = 1083
    TIMESTAMP = 1114
    TIMESTAMPTZ = 1184
    INTERVAL = 1186
    TIMETZ = 1266
    BIT = 1560
    VARBIT = 1562
    NUMERIC = 1700
    REFCURSOR = 1790
    REGPROCEDURE = 2202
    REGOPER = 2203
    REGOPERATOR = 2204
    REGCLASS = 2205
    REGTYPE = 2206
    REGROLE = 4096
    REGNAMESPACE = 4089
    REGTYPEARRAY = 2211
    UUID = 2950
    LSN = 3220
    TSVECTOR = 3614
    GTSVECTOR = 3642
    TSQUERY = 3615
    REGCONFIG = 3734
    REGDICTIONARY = 3769
    JSONB = 3802
    INT4RANGE = 3904
    RECORD = 2249
    RECORDARRAY = 2287
    CSTRING = 2275
    ANY = 2276
    ANYARRAY = 2277
    VOID = 2278
    TRIGGER = 2279
    EVTTRIGGER = 3838
    LANGUAGE_HANDLER = 2280
    INTERNAL = 2281
    OPAQUE = 2282
    ANYELEMENT = 2283
    ANYNONARRAY = 2776
    ANYENUM = 3500
    FDW_HANDLER = 3115
    TSM_HANDLER = 3310
    ANYRANGE = 3831